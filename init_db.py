from nfclink.db import main

if __name__ == "__main__":
    main()
