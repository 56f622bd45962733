from reftag.cli.app import main

main()
