from PaperQuery.cli import main

main()
