from cvfit.cli import main

main()
