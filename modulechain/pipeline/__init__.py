"""
A pipeline is an ordered list of modules. Each module:

1. Is placed in its own directory, ``<output_path>/<ordinal>_<name>``.
2. Has its input units partitioned into batches, each written as one **worker** script by
   the module's build capability, plus one ``MAIN_`` **driver** script that runs them.
3. Records its progress in ``STARTED`` and ``COMPLETE`` marker files, so that an interrupted
   pipeline resumes at the first module that did not complete.
4. Reads the ``output/`` directory of the module before it as its input.
"""
