"""
Interfaces for external collaborators.
"""
from .export_services import IAlertChannel, IFolderPicker, IFolderRevealer, IRenderingHost

__all__ = ["IAlertChannel", "IFolderPicker", "IFolderRevealer", "IRenderingHost"]
