## ember — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# ember — A tiny expression language with a staged command line and lazy sequence engine.
#

__version__ = "0.1.0"
