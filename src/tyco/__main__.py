# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Allow ``python -m tyco``."""

from tyco.cli.main import main

if __name__ == "__main__":
    main()
