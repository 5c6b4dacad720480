from backport.cli.app import main

main()
