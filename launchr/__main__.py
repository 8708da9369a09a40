from launchr.cli import main

main()
