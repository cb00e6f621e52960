"""Sequential bioinformatics module pipelines driven by generated shell and R scripts."""
from modulechain.standalone_utilities.configuration_settings import get_version

submodule_names = ['pipeline']

__version__ = get_version()
