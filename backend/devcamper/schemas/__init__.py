"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .auth import *
from .bootcamp import *
from .course import *
from .review import *
from .user import *
