from src.grid_overlay.cli import main

main()
