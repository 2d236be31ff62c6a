from store_network.main import main

main()
