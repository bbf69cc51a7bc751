"""``python -m usenest`` runs the bootstrap entry point."""

from usenest.bootstrap import main

main()
