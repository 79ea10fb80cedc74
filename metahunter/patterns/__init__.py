"""Pattern detection: find the dominant word ("meta") across token names.

- engine.py: name normalization, stop words, frequency ranking, evidence selection
"""
