from tmpl.cli import main

main()
