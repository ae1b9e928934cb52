#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tile one image or PDF page across gang sheet PDF pages.
"""

# local repo modules
import gang_sheet_builder.cli


if __name__ == "__main__":
	gang_sheet_builder.cli.main()
