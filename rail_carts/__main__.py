from rail_carts.cli import main

main()
