from topdash.dashboard import main

main()
