# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""A module controlling the configuration of property runs.

Either an explicit PropertyConfig object can be passed to ``run_property``
or the default object on this module can be replaced by loading a profile.
"""

import contextlib
from enum import IntEnum, unique

import attr

from shapecheck.errors import InvalidArgument, InvalidState
from shapecheck.internal.validation import check_type
from shapecheck.utils.conventions import not_set
from shapecheck.utils.dynamicvariables import DynamicVariable

__all__ = ["PropertyConfig", "Verbosity", "local_config"]

all_settings = {}

# Spellings accepted from config files and keyword arguments that name the
# same setting as another key.
ALIASES = {"max_shrinking_attempts": "max_shrink_attempts"}


class configProperty:
    def __init__(self, name, show_default):
        self.name = name
        self.show_default = show_default

    def __get__(self, obj, type=None):
        if obj is None:
            return self
        try:
            return obj.__dict__[self.name]
        except KeyError:
            raise AttributeError(self.name) from None

    def __set__(self, obj, value):
        obj.__dict__[self.name] = value

    def __delete__(self, obj):
        raise AttributeError("Cannot delete attribute %s" % (self.name,))

    @property
    def __doc__(self):
        description = all_settings[self.name].description
        default = (
            repr(getattr(PropertyConfig.default, self.name))
            if self.show_default
            else "(dynamically calculated)"
        )
        return "%s\n\ndefault value: ``%s``" % (description, default)


default_variable = DynamicVariable(None)


class PropertyConfigMeta(type):
    @property
    def default(self):
        v = default_variable.value
        if v is not None:
            return v
        if hasattr(PropertyConfig, "_current_profile"):
            PropertyConfig.load_profile(PropertyConfig._current_profile)
            assert default_variable.value is not None
        return default_variable.value

    def _assign_default_internal(self, value):
        default_variable.value = value

    def __setattr__(self, name, value):
        if name == "default":
            raise AttributeError(
                "Cannot assign to the property PropertyConfig.default - "
                "consider using PropertyConfig.load_profile instead."
            )
        elif not (isinstance(value, configProperty) or name.startswith("_")):
            raise AttributeError(
                "Cannot assign PropertyConfig.%s=%r - the PropertyConfig class "
                "is immutable.  You can change the global default with "
                "PropertyConfig.load_profile, or pass an explicit "
                "PropertyConfig(...) to run_property instead." % (name, value)
            )
        return type.__setattr__(self, name, value)


class PropertyConfig(metaclass=PropertyConfigMeta):
    """A PropertyConfig object controls how many cases a property run tries,
    how large the generated values may be, how the random generator is
    seeded and how hard a failure is shrunk.

    Unset values are picked up from the ``parent`` argument if given, and
    from ``PropertyConfig.default`` otherwise.
    """

    _WHITELISTED_REAL_PROPERTIES = ["_construction_complete"]
    __definitions_are_locked = False
    _profiles = {}
    __module__ = "shapecheck"

    def __getattr__(self, name):
        if name in all_settings:
            return all_settings[name].default
        else:
            raise AttributeError("PropertyConfig has no attribute %s" % (name,))

    def __init__(self, parent=None, **kwargs):
        if parent is not None and not isinstance(parent, PropertyConfig):
            raise InvalidArgument(
                "Invalid argument: parent=%r is not a PropertyConfig instance"
                % (parent,)
            )
        kwargs = _resolve_aliases(kwargs)
        self._construction_complete = False
        defaults = parent or PropertyConfig.default
        if defaults is not None:
            for setting in all_settings.values():
                if kwargs.get(setting.name, not_set) is not_set:
                    kwargs[setting.name] = getattr(defaults, setting.name)
                elif setting.validator:
                    kwargs[setting.name] = setting.validator(kwargs[setting.name])
        for name, value in kwargs.items():
            if name not in all_settings:
                raise InvalidArgument(
                    "Invalid argument: %r is not a valid setting" % (name,)
                )
            setattr(self, name, value)
        self._construction_complete = True

    @classmethod
    def _define_setting(
        cls,
        name,
        description,
        default,
        options=None,
        validator=None,
        show_default=True,
    ):
        """Add a new setting.

        - name is the name of the property that will be used to access the
          setting. This must be a valid python identifier.
        - description will appear in the property's docstring
        - default is the default value.
        """
        if PropertyConfig.__definitions_are_locked:
            raise InvalidState(
                "PropertyConfig definitions have been locked and may no longer "
                "be extended."
            )
        if options is not None:
            options = tuple(options)
            assert default in options
        else:
            assert validator is not None

        all_settings[name] = Setting(
            name=name,
            description=description.strip(),
            default=default,
            options=options,
            validator=validator,
        )
        setattr(PropertyConfig, name, configProperty(name, show_default))

    @classmethod
    def lock_further_definitions(cls):
        PropertyConfig.__definitions_are_locked = True

    def __setattr__(self, name, value):
        if name in PropertyConfig._WHITELISTED_REAL_PROPERTIES:
            return object.__setattr__(self, name, value)
        elif name in all_settings:
            if self._construction_complete:
                raise InvalidState(
                    "PropertyConfig objects are immutable and may not be "
                    "assigned to after construction."
                )
            setting = all_settings[name]
            if setting.options is not None and value not in setting.options:
                raise InvalidArgument(
                    "Invalid %s, %r. Valid options: %r"
                    % (name, value, setting.options)
                )
            return object.__setattr__(self, name, value)
        else:
            raise AttributeError("No such setting %s" % (name,))

    def __eq__(self, other):
        return isinstance(other, PropertyConfig) and all(
            getattr(self, name) == getattr(other, name) for name in all_settings
        )

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in sorted(all_settings)))

    def __repr__(self):
        bits = ("%s=%r" % (name, getattr(self, name)) for name in all_settings)
        return "PropertyConfig(%s)" % ", ".join(sorted(bits))

    @staticmethod
    def register_profile(name, parent=None, **kwargs):
        """Registers a collection of values to be used as a configuration
        profile.

        Profiles can be loaded by name - for example, you might create a
        'fast' profile which runs fewer cases, keep the 'default' profile,
        and create a 'ci' profile that runs many more and shrinks harder.

        The arguments to this method are exactly as for PropertyConfig:
        optional ``parent`` config, and keyword arguments for each setting
        that will be set differently to parent (or PropertyConfig.default, if
        parent is None).
        """
        check_type(str, name, "name")
        PropertyConfig._profiles[name] = PropertyConfig(parent=parent, **kwargs)

    @staticmethod
    def get_profile(name):
        """Return the profile with the given name."""
        check_type(str, name, "name")
        try:
            return PropertyConfig._profiles[name]
        except KeyError:
            raise InvalidArgument("Profile %r is not registered" % (name,)) from None

    @staticmethod
    def load_profile(name):
        """Loads in the configuration defined in the profile provided.

        If the profile does not exist, InvalidArgument will be raised.
        Any setting not defined in the profile will be the library
        defined default for that setting.
        """
        check_type(str, name, "name")
        PropertyConfig._current_profile = name
        PropertyConfig._assign_default_internal(PropertyConfig.get_profile(name))

    @staticmethod
    def load_config_file(path=None):
        """Registers every profile found in a ``shapecheck.ini`` file.

        With no ``path`` the file is looked up at the project root. A
        ``[shapecheck]`` section redefines the ``default`` profile and
        ``[shapecheck:<name>]`` sections define named profiles, each built on
        top of the library defaults. If the file names a profile to load with
        a ``load_profile`` key, that profile becomes the default. Returns the
        names of the profiles that were registered.
        """
        from shapecheck._config_file import LOAD_PROFILE, load_profiles_from_config_file

        profiles = load_profiles_from_config_file(path)
        to_load = profiles.pop(LOAD_PROFILE, None)
        for name, values in profiles.items():
            PropertyConfig.register_profile(
                name, parent=PropertyConfig._profiles["library"], **values
            )
        if to_load is not None:
            PropertyConfig.load_profile(to_load)
        return sorted(profiles)


def _resolve_aliases(kwargs):
    for alias, name in ALIASES.items():
        if alias in kwargs:
            if name in kwargs:
                raise InvalidArgument(
                    "Cannot pass both %s=%r and %s=%r, which name the same "
                    "setting." % (alias, kwargs[alias], name, kwargs[name])
                )
            kwargs[name] = kwargs.pop(alias)
    return kwargs


@contextlib.contextmanager
def local_config(config):
    """Use ``config`` as PropertyConfig.default for the extent of a with
    block, in the current thread only."""
    with default_variable.with_value(config):
        yield config


@attr.s()
class Setting:
    name = attr.ib()
    description = attr.ib()
    default = attr.ib()
    options = attr.ib()
    validator = attr.ib()


def _num_tests_validator(x):
    check_type(int, x, name="num_tests")
    if x < 1:
        raise InvalidArgument("num_tests=%r should be at least one." % (x,))
    return x


PropertyConfig._define_setting(
    "num_tests",
    default=100,
    validator=_num_tests_validator,
    description="""
Number of values to generate and check the property against. The run stops
early at the first value for which the property fails.
""",
)


def _max_size_validator(x):
    check_type(int, x, name="max_size")
    if not 0 <= x < 2 ** 32:
        raise InvalidArgument(
            "max_size=%r must be a non-negative 32-bit integer." % (x,)
        )
    return x


PropertyConfig._define_setting(
    "max_size",
    default=100,
    validator=_max_size_validator,
    description="""
The single knob bounding generated data: integers are drawn from
``[-max_size, max_size]`` (or ``[0, max_size]`` when unsigned), floats are
scaled by it, and collection lengths never exceed it.
""",
)


def _seed_validator(x):
    if x is None:
        return x
    check_type(int, x, name="seed")
    if not 0 <= x < 2 ** 64:
        raise InvalidArgument("seed=%r must be an unsigned 64-bit integer." % (x,))
    return x


PropertyConfig._define_setting(
    "seed",
    default=None,
    validator=_seed_validator,
    description="""
Seed for the run's random generator. Two runs with the same seed and
configuration generate the same values. If None, a seed is derived from the
clock and reported with the result so a failure can be replayed.
""",
)


PropertyConfig._define_setting(
    "shrink_enabled",
    default=True,
    options=(True, False),
    description="""
Whether to search for a smaller counterexample after a failure is found.
""",
)


def _max_shrink_attempts_validator(x):
    check_type(int, x, name="max_shrink_attempts")
    if x < 0:
        raise InvalidArgument("max_shrink_attempts=%r must be non-negative." % (x,))
    return x


PropertyConfig._define_setting(
    "max_shrink_attempts",
    default=100,
    validator=_max_shrink_attempts_validator,
    description="""
Upper bound on the number of times the property is re-run while shrinking a
counterexample. Also accepted as ``max_shrinking_attempts``.
""",
)


def _allocation_limit_validator(x):
    if x is None:
        return x
    check_type(int, x, name="allocation_limit")
    if x < 1:
        raise InvalidArgument("allocation_limit=%r must be at least one." % (x,))
    return x


PropertyConfig._define_setting(
    "allocation_limit",
    default=None,
    validator=_allocation_limit_validator,
    description="""
Maximum number of collection cells that may be live at once during a run.
Generation that would exceed it aborts the run. None means unlimited.
""",
)


@unique
class Verbosity(IntEnum):
    quiet = 0
    normal = 1
    verbose = 2
    debug = 3

    def __repr__(self):
        return "Verbosity.%s" % (self.name,)


def _verbosity_validator(x):
    if isinstance(x, str):
        try:
            return Verbosity[x]
        except KeyError:
            pass
    if not isinstance(x, Verbosity):
        raise InvalidArgument(
            "verbosity=%r is not a valid Verbosity. Valid options: %r"
            % (x, tuple(Verbosity))
        )
    return x


PropertyConfig._define_setting(
    "verbosity",
    default=Verbosity.normal,
    validator=_verbosity_validator,
    description="Control the verbosity level of shapecheck messages",
)

PropertyConfig.lock_further_definitions()


PropertyConfig.register_profile("library", PropertyConfig())
PropertyConfig.register_profile("default", PropertyConfig())
PropertyConfig.load_profile("default")
assert PropertyConfig.default is not None
