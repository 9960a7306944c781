import os
import tempfile

# Keep the import-time database bootstrap away from the working tree.
os.environ.setdefault("MEALFIT_DATA_ROOT", tempfile.mkdtemp(prefix="mealfit-tests-"))
