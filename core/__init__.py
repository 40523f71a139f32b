"""
TrueFrame analyzer engine
"""
