from uia_locators.cli import main

main()
