from .order import OrderEngine, renumber
from .store import BlockStore, ProductCatalog, SiteContextProvider
