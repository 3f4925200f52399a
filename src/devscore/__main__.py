from devscore.cli import main

raise SystemExit(main())
