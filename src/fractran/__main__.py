from fractran.cli import main

raise SystemExit(main())
