from ytresolve.interfaces.cli import start

raise SystemExit(start())
