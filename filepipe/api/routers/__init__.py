from filepipe.api.routers.objects import router as objects_router
from filepipe.api.routers.results import router as results_router
from filepipe.api.routers.upload import router as upload_router

__all__ = ["objects_router", "results_router", "upload_router"]
