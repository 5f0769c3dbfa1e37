import sys

from ranking_quality_analysis.cli import main

sys.exit(main())
