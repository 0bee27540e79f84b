import sys

from test.stubs import sublime, sublime_plugin

# plugin modules import the host API by name
sys.modules.setdefault('sublime', sublime)
sys.modules.setdefault('sublime_plugin', sublime_plugin)
