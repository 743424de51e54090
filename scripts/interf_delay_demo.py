#!/usr/bin/env python3

################################################################################
# Copyright (c) 2026, National Research Foundation (SARAO)
#
# Licensed under the BSD 3-Clause License (the "License"); you may not use
# this file except in compliance with the License. You may obtain a copy
# of the License at
#
#   https://opensource.org/licenses/BSD-3-Clause
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

#
# Tabulate the interferometric atmospheric delay and altimetry correction
# of a GNSS reflectometry antenna over a sweep of satellite elevation angles.
#

import argparse

import astropy.units as u
import numpy as np

import atminterf

parser = argparse.ArgumentParser(
    description="Print interferometric atmospheric delays and height corrections."
)
parser.add_argument('--height', type=float, default=10.0,
                    help='antenna height above reflector, in metres (default %(default)s)')
parser.add_argument('--model', default='polynomial',
                    choices=['polynomial', 'meteo', 'gpt'],
                    help='atmospheric model (default %(default)s)')
parser.add_argument('--min-elev', type=float, default=5.0,
                    help='lowest elevation angle, in degrees (default %(default)s)')
parser.add_argument('--max-elev', type=float, default=30.0,
                    help='highest elevation angle, in degrees (default %(default)s)')
parser.add_argument('--step', type=float, default=1.0,
                    help='elevation angle step, in degrees (default %(default)s)')
parser.add_argument('--approximate', action='store_true',
                    help='use the small-bending approximate height formulas')
args = parser.parse_args()

elevation = np.arange(args.min_elev, args.max_elev + args.step / 2, args.step) * u.deg
delay_model = atminterf.InterferometricDelay(
    args.model, options={'H_approximate': args.approximate}
)
result = delay_model(elevation, args.height * u.m)

print(f"Model {args.model!r} with antenna height {args.height} m")
print(f"{'elev [deg]':>10} {'bending [deg]':>14} {'delay [mm]':>11} {'height corr [mm]':>17}")
for e, de, dt, Ht in zip(elevation, result.de, result.dt, result.Ht):
    print(f"{e.value:10.2f} {de.value:14.5f} {dt.to_value(u.mm):11.3f} "
          f"{Ht.to_value(u.mm):17.3f}")
