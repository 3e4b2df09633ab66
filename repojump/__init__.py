"""repojump — frecency-ranked jumping between local git clones."""

__version__ = "0.3.1"
