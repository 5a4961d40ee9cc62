from typing import List
from pydantic import BaseModel


class DashboardStats(BaseModel):
    totalUsers: int
    totalRooms: int
    totalBookings: int
    approvedRooms: int
    draftRooms: int
    rejectedRooms: int


class ChartPoint(BaseModel):
    name: str
    value: int
    fill: str


class BookingTrendPoint(BaseModel):
    date: str
    bookings: int


class UserTrendPoint(BaseModel):
    date: str
    users: int


class DashboardCharts(BaseModel):
    roomStatus: List[ChartPoint]
    mainStats: List[ChartPoint]
    bookingTrends: List[BookingTrendPoint]
    userTrends: List[UserTrendPoint]


class DashboardResponse(BaseModel):
    stats: DashboardStats
    charts: DashboardCharts
