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

"""Merging of partial option records over their defaults."""

import dataclasses
from collections.abc import Mapping


def merge_options(default, opt=None):
    """Overlay options `opt` on top of `default` option record.

    Parameters
    ----------
    default : dataclass instance
        Frozen option record with the default value of every field
    opt : None, dataclass instance of the same type, or mapping, optional
        Options to overlay. A mapping only needs to contain the fields that
        differ from the default. Fields with a value of None are ignored.

    Returns
    -------
    merged : dataclass instance
        New option record of the same type as `default`

    Raises
    ------
    TypeError
        If `opt` has an unsupported type or the mapping has unknown fields
    """
    if opt is None:
        return default
    if isinstance(opt, type(default)):
        return opt
    if not isinstance(opt, Mapping):
        raise TypeError(
            f"Options should be a {type(default).__name__} or a mapping, "
            f"not {type(opt).__name__}"
        )
    names = [field.name for field in dataclasses.fields(default)]
    unknown = sorted(set(opt) - set(names))
    if unknown:
        raise TypeError(
            f"Unknown {type(default).__name__} option(s) {unknown}, "
            f"available ones are {names}"
        )
    overrides = {name: value for name, value in opt.items() if value is not None}
    return dataclasses.replace(default, **overrides)
