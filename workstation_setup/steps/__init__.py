from .step_10_bootstrap_homebrew import BootstrapHomebrewStep
from .step_15_update_homebrew import UpdateHomebrewStep
from .step_20_install_cli_tools import InstallCliToolsStep
from .step_30_install_apps import InstallAppsStep
from .step_35_install_editor_extensions import InstallEditorExtensionsStep
from .step_40_setup_node import SetupNodeStep
from .step_50_configure_git import ConfigureGitStep
from .step_60_provision_signing_key import ProvisionSigningKeyStep
from .step_90_finalize import FinalizeStep

__all__ = [
    "BootstrapHomebrewStep",
    "UpdateHomebrewStep",
    "InstallCliToolsStep",
    "InstallAppsStep",
    "InstallEditorExtensionsStep",
    "SetupNodeStep",
    "ConfigureGitStep",
    "ProvisionSigningKeyStep",
    "FinalizeStep",
]
