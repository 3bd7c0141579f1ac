"""
Floorgrid Geometry Module

Pure geometry for wall networks, wall-mounted element placement and gable roofs.
Sub-modules are imported explicitly by callers.
"""
