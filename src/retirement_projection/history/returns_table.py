# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Embedded S&P 500 annual total returns, 1926-2024.

Used whenever the remote history cannot be retrieved. Values are decimals
(0.2502 for 25.02%), newest year first.
"""

from typing import Tuple

NEWEST_YEAR = 2024
OLDEST_YEAR = 1926

EMBEDDED_RETURNS: Tuple[float, ...] = (
    # 2024-2020
    0.2502, 0.2629, -0.1811, 0.2871, 0.1840,
    # 2019-2015
    0.3149, -0.0454, 0.2161, -0.0438, 0.0138,
    # 2014-2010
    0.1361, 0.3239, 0.1596, 0.0211, 0.1508,
    # 2009-2005
    0.2646, -0.3700, 0.0549, -0.0910, -0.1189,
    # 2004-2000
    0.1088, 0.0491, 0.1579, -0.2210, -0.1312,
    # 1999-1995
    0.2104, 0.2858, 0.3336, 0.2296, 0.3758,
    # 1994-1990
    0.0132, 0.1008, 0.0762, -0.0307, 0.3101,
    # 1989-1985
    0.3173, 0.0627, 0.2234, 0.2142, 0.1852,
    # 1984-1980
    0.0648, 0.3247, -0.0492, 0.2142, 0.3242,
    # 1979-1975
    0.1844, 0.0656, -0.0718, 0.2384, 0.3720,
    # 1974-1970
    -0.2647, -0.1466, 0.1898, 0.1431, 0.0401,
    # 1969-1965
    -0.0850, 0.1106, 0.2398, -0.1006, 0.1245,
    # 1964-1960
    0.1648, 0.2280, -0.0873, 0.2689, 0.0047,
    # 1959-1955
    0.1196, 0.4336, -0.1078, 0.0656, 0.3156,
    # 1954-1950
    0.5262, -0.0099, 0.1837, 0.2402, 0.3171,
    # 1949-1945
    0.1879, 0.0550, 0.0571, -0.0807, 0.3644,
    # 1944-1940
    0.1975, 0.2590, 0.2034, -0.1159, -0.0978,
    # 1939-1935
    -0.0041, 0.3112, -0.3503, 0.3392, 0.4767,
    # 1934-1930
    -0.0144, 0.5399, -0.0819, -0.4334, -0.2490,
    # 1929-1926
    -0.0842, 0.4361, 0.3749, 0.1162,
)

EMBEDDED_YEARS: Tuple[int, ...] = tuple(range(NEWEST_YEAR, OLDEST_YEAR - 1, -1))

