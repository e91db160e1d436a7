from dicebox.main import main

main()
