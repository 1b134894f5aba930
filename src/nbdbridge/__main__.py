from nbdbridge.cli import main

raise SystemExit(main())
