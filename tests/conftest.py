import matplotlib

# Tests save figures to files; never open a window.
matplotlib.use("Agg")
