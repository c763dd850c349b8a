import sys

from cocoons_ftp.main import main

sys.exit(main())
