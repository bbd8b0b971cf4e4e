from __future__ import annotations

import subprocess
import sys


def main():
    subprocess.run(
        [sys.executable, "-m", "react_loop.entrypoints.cli", "What's the weather in Paris?", "--env", "dev"],
        check=True,
    )


if __name__ == "__main__":
    main()
