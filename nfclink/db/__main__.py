from nfclink.db import main

main()
