"""Exceptions raised by pipeline validation, script generation and state tracking.

Script execution failures are not represented here; they are collected as data from
failure marker files (see ``modulechain.pipeline.failures``).
"""


class ModuleChainError(Exception):
    """Base class for all pipeline errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigMissing(ModuleChainError, ValueError):
    """A required configuration value is absent."""
    key: str
    section: str

    def __init__(self, key: str, section: str = 'general'):
        self.key = key
        self.section = section
        super().__init__(f'Required configuration value "{key}" not found (section [{section}]).')


class ConfigFormat(ModuleChainError, ValueError):
    """A configuration value is present but malformed."""
    key: str
    value: str

    def __init__(self, key: str, value: str, expectation: str):
        self.key = key
        self.value = value
        super().__init__(f'Configuration value {key}="{value}" is invalid: {expectation}.')


class MissingRequiredModule(ModuleChainError):
    """A capability that the pipeline requires is not provided by any configured module."""
    capability: str

    def __init__(self, capability: str, required_by: str | None = None):
        self.capability = capability
        message = f'Unable to find required module with capability "{capability}"'
        if required_by is not None:
            message += f' (needed before module "{required_by}")'
        super().__init__(message + '.')


class ModuleBuildFailure(ModuleChainError):
    """A module's build capability raised while generating scripts."""
    module_name: str

    def __init__(self, module_name: str, cause: BaseException):
        self.module_name = module_name
        super().__init__(f'Script generation failed for module "{module_name}": {cause}')


class MarkerIOFailure(ModuleChainError):
    """A lifecycle marker file could not be created, verified or removed."""
    path: str

    def __init__(self, path: str, action: str = 'create'):
        self.path = path
        super().__init__(f'Unable to {action} lifecycle marker {path}')
