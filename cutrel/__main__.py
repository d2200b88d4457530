from cutrel.cli.app import main

main()
