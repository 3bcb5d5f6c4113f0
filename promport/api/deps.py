# Dependency injection for the API

from fastapi import Depends

from promport.core.config import Settings, get_settings
from promport.utils.promtool import Promtool


def get_promtool(settings: Settings = Depends(get_settings)) -> Promtool:
    return Promtool(settings)
