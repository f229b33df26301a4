from thisgen.cli import main

main()
