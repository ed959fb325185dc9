from __future__ import annotations

from puppet.pipeline.runner import main

if __name__ == "__main__":
    main()
