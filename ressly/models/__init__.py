from ressly.models.base import IDModel, TimestampModel
from ressly.models.residential import Residential
from ressly.models.house import House
from ressly.models.resident import Resident
from ressly.models.report import Report
from ressly.models.report_image import ReportImage
from ressly.models.report_vote import ReportVote

__all__ = [
    'IDModel',
    'TimestampModel',
    'Residential',
    'House',
    'Resident',
    'Report',
    'ReportImage',
    'ReportVote',
]
