from heatgutter.qt import *
