from src.kanji_memory_game.app.entrypoint import main

main()
