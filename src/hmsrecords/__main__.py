from hmsrecords.cli import main

main()
