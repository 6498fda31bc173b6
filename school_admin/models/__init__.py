from .attendance import Attendance
from .inventory import InventoryItem
from .payment import Payment
from .student import Student
