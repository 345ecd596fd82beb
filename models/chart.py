"""Pydantic models for chart-ready aggregation output"""
from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class GroupingMode(str, Enum):
    """Dimension used to bucket expenses for charting."""
    CATEGORY = 'category'
    DAY = 'day'
    MONTH = 'month'
    YEAR = 'year'


class SeriesPoint(BaseModel):
    name: str
    value: float

    model_config = ConfigDict(frozen=True)


class GroupedPoint(BaseModel):
    """A time bucket holding one value per category."""
    name: str
    series: List[SeriesPoint]

    model_config = ConfigDict(frozen=True)


class FlatSeries(BaseModel):
    kind: Literal['flat'] = 'flat'
    points: List[SeriesPoint]


class GroupedSeries(BaseModel):
    kind: Literal['grouped'] = 'grouped'
    points: List[GroupedPoint]


ChartSeries = Annotated[Union[FlatSeries, GroupedSeries], Field(discriminator='kind')]
