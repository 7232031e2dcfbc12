from .sector_reader import SectorReader
