"""PySide6 front end for the guitar tuner."""
