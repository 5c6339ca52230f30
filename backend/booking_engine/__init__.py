"""
Движок доступности, загрузки и выручки студий звукозаписи
"""
__version__ = "0.1.0"
