from contextos_sync.cli import main

raise SystemExit(main())
