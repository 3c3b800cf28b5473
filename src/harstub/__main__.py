from harstub.cli import main

main()
