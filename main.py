from offline_chat.app import main

if __name__ == "__main__":
    main()
