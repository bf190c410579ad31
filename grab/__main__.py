from grab.cli.app import main

main()
