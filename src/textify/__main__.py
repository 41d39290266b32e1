from textify.cli import main

raise SystemExit(main())
